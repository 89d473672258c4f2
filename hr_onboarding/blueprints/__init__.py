"""
Consultant Onboarding Engine
Blueprint registry.
"""
