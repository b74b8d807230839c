# policy_engine/services/__init__.py
"""Policy decisions and the account-side caller that persists them"""
