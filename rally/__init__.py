"""Rally Chase - top-down flag collecting chase game"""
