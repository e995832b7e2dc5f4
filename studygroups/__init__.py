"""
Study group backend.

Forms candidate study groups from registered people who share the same
weekly availability.
"""
