"""Yaw policies, path resampling, particle goal search, benchmark scoring and pose-editor models for micro aerial vehicles."""

__version__ = "0.1.0"