"""
asnlens - IP-to-ASN lookups over DNS

Entry point for running as a module:
    python -m asnlens <target>
"""

from .cli import main

if __name__ == '__main__':
    main()
