"""
Pytest configuration.
"""

import os
import sys

# Add project directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Set test environment before qrz_config is imported
os.environ["QRZ_XML_URL"] = "http://xmldata.qrz.test/xml/current/"
os.environ["QRZ_TIMEOUT"] = "5"
os.environ["QRZ_AGENT"] = ""
os.environ["QRZ_USER_AGENT"] = "QRZXMLClient/test"

