class Config:
    """Attribute bag for operator selection, e.g. ``Config(method='diagonal_qn', version='andrei.v1')``."""

    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)

    def get(self, key, default=None):
        return getattr(self, key, default)

    def __repr__(self):
        items = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"Config({items})"
