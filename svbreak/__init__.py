"""
characterization of structural variant breakpoints from assembled and discordant read evidence
"""
__version__ = '0.3.0'
