from typing import Protocol, Any, runtime_checkable


@runtime_checkable
class DiagonalOperatorProtocol(Protocol):
    @property
    def dimension(self) -> int:
        """Number of rows (= number of columns)."""
        ...

    def is_symmetric(self) -> bool:
        ...

    def apply(self, v: Any, alpha: float = 1.0, beta: float = 0.0, out: Any = None) -> Any:
        """Compute alpha * (D v) + beta * out."""
        ...

    def to_diagonal(self) -> Any:
        """Materialize the diagonal as a vector."""
        ...


@runtime_checkable
class SecantUpdateProtocol(DiagonalOperatorProtocol, Protocol):
    def update(self, s: Any, y: Any, logfile: Any = None) -> Any:
        """Update from a step s = x_{k+1} - x_k and gradient change y."""
        ...


@runtime_checkable
class ModifiedSecantUpdateProtocol(DiagonalOperatorProtocol, Protocol):
    def update(self, s: Any, y: Any, t: Any, z: float, u: Any, logfile: Any = None) -> Any:
        """Update from a modified secant pair."""
        ...
