"""rtwctl - rtw88 WiFi driver installer with DKMS support."""

__version__ = "0.6.0"
