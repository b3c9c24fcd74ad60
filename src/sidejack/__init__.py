"""
Sidejack: session-cookie hijacking detection.

Correlates web-session cookie sightings from reconstructed HTTP traffic
and reports session reuse, address roaming, and cookie hijacking.
"""

__version__ = "0.1.0"
__author__ = "Corey A. Wade"
