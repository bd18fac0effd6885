"""Numerical kernels and date helpers."""
