"""
Entry point for running from a source checkout.
"""

from htmlbook.main import main

if __name__ == "__main__":
    main()
