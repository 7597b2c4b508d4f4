"""Wrappers around the host tools the installer drives.

Each module talks to one external tool (dkms, lsmod/modprobe, git,
mokutil, sudo) and returns plain Python values.
"""
