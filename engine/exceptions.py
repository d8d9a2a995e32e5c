# engine/exceptions.py

class AnalyseError(Exception):
    pass


class ConfigurationError(AnalyseError, ValueError):
    pass


class DataUnavailableError(AnalyseError):
    pass


class ModuleExecutionError(AnalyseError):
    pass
