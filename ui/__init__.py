"""
Qt widgets that render replay frames.
"""
