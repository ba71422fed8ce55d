"""Configuration package for lloydkit."""
