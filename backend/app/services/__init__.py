"""
VideoAPI - Services
"""
