"""
CultiMap - User Interface Package

GTK4/libadwaita widgets hosting the selection engine.
"""
