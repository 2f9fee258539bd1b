"""
LBX toolkit — read legacy LBX archive containers.

Architecture:
    Container:  entry count + "AD FE 00 00" signature + type tag, followed by
                a little-endian offset table and (for image archives) a
                name/comment table at offset 512
    Palette:    768 bytes (256 x RGB) read from an external resource file
    Bridge:     lbx info / lbx list / lbx extract / lbx palette CLI commands
"""

__version__ = "0.1.0"

# Container constants
LBX_SIGNATURE = b"\xad\xfe\x00\x00"
LBX_EXTENSION = ".lbx"
LBX_MAX_FILE_SIZE = 64 * 1024 * 1024  # 64 MB — original archives are well under 2 MB

# Palette constants
PALETTE_OFFSET = 13444  # location of the palette inside FONTS.LBX
PALETTE_COLORS = 256
PALETTE_SIZE = PALETTE_COLORS * 3  # 768 bytes, one RGB triple per colour

# Config constants
CONFIG_DIR_NAME = ".lbx"
CONFIG_FILE_NAME = "config.toml"
