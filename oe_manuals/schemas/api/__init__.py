"""
OE Manuals: versioned API schemas
"""
