# company_scout/errors.py


class AnalysisFailedError(RuntimeError):
    """Raised when the model call fails (network, auth, quota). The only error the UI sees."""
