"""
helpers for the pysam read records consumed by the breakpoint model
"""
