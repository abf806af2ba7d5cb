"""aliasmgr - manage shell aliases in groups from a TOML file"""

__version__ = "0.1.0"
