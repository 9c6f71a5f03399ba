class ConditionsError(Exception):
    """Base exception for the conditions engine"""
    pass

class InvalidRuleError(ConditionsError):
    """Raised when a matcher or handler lacks its required callables"""
    pass

class PatternError(ConditionsError):
    """Raised when a `/pattern/flags` condition cannot be compiled"""
    pass
