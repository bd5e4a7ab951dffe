"""Dataset registry and the built-in truth-table datasets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.types import DatasetValue


@dataclass(frozen=True)
class DatasetSpec:
    """Description of a dataset registered in the system.

    Attributes
    ----------
    name:
        Registry identifier.
    samples:
        Training samples, in the order they are fed to the network.
    d_in:
        Width every ``inputs`` sequence must have.
    d_out:
        Width every ``targets`` sequence must have.
    provenance:
        Free-form metadata recorded in run manifests.
    """

    name: str
    samples: List[DatasetValue]
    d_in: int
    d_out: int
    provenance: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.samples)


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(name: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` registered as ``name``."""

    if name not in _REGISTRY:
        raise KeyError(f"Unknown dataset: {name}")
    spec = _REGISTRY[name](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not spec.samples:
        raise ValueError(f"Dataset {spec.name!r} has no samples")
    for idx, sample in enumerate(spec.samples):
        if len(sample.inputs) != spec.d_in:
            raise ValueError(
                f"Sample {idx} of {spec.name!r} has {len(sample.inputs)} inputs, "
                f"expected {spec.d_in}"
            )
        if len(sample.targets) != spec.d_out:
            raise ValueError(
                f"Sample {idx} of {spec.name!r} has {len(sample.targets)} targets, "
                f"expected {spec.d_out}"
            )


def _truth_table(name: str, gate: Callable[[bool, bool], bool]) -> DatasetFactory:
    def _factory(**_: object) -> DatasetSpec:
        samples = [
            DatasetValue(inputs=[float(a), float(b)], targets=[float(gate(bool(a), bool(b)))])
            for a in (0, 1)
            for b in (0, 1)
        ]
        return DatasetSpec(
            name=name,
            samples=samples,
            d_in=2,
            d_out=1,
            provenance={"type": "truth_table", "gate": name},
        )

    return _factory


register_dataset("xor", _truth_table("xor", lambda a, b: a != b))
register_dataset("and", _truth_table("and", lambda a, b: a and b))
register_dataset("or", _truth_table("or", lambda a, b: a or b))
register_dataset("nand", _truth_table("nand", lambda a, b: not (a and b)))


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
