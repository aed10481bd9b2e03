"""
Repeated-measures design object.

Wraps the aggregated subjects x cells table and its labels.
Factory methods handle the supported inputs (arrays, tabular data).
"""

from dataclasses import dataclass, replace
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.datasource import DataSource
from pyeffectsize.core.exceptions import DimensionError, ValidationError
from pyeffectsize.anova._aggregate import aggregate_trials


@dataclass(frozen=True)
class RMDesign:
    """
    Validated, fully crossed within-subjects design.

    values[i, l1, ..., lk] is the mean response of subject i in the cell
    (factors[0]=levels[factors[0]][l1], ...). A missing cell cannot be
    represented, so every design instance is balanced.

    Created via factory methods, not directly.
    """
    values: NDArray[np.floating[Any]]
    subjects: tuple[str, ...]
    factors: tuple[str, ...]
    levels: dict[str, tuple[str, ...]]
    cell_counts: NDArray | None
    n_trials: int
    design_type: str = 'rm'

    @property
    def n_subjects(self) -> int:
        return len(self.subjects)

    @property
    def n_cells(self) -> int:
        """Number of factor-level combinations."""
        return int(np.prod([len(self.levels[f]) for f in self.factors]))

    @property
    def n_levels(self) -> tuple[int, ...]:
        return tuple(len(self.levels[f]) for f in self.factors)

    def wide(self) -> NDArray[np.floating[Any]]:
        """Subjects x cells matrix, cells in C order over the factor axes."""
        return self.values.reshape(self.n_subjects, self.n_cells)

    def to_long(self) -> tuple[NDArray, NDArray, dict[str, NDArray]]:
        """
        Long-format aggregated observations.

        Returns:
            (y, subject, within) with one entry per subject x cell, in the
            same form accepted by for_repeated_measures().
        """
        grids = np.meshgrid(
            np.arange(self.n_subjects),
            *[np.arange(n) for n in self.n_levels],
            indexing='ij',
        )
        subject = np.asarray(self.subjects)[grids[0].ravel()]
        within = {
            name: np.asarray(self.levels[name])[grids[j + 1].ravel()]
            for j, name in enumerate(self.factors)
        }
        return self.values.ravel().copy(), subject, within

    def with_subjects(
        self,
        values: NDArray[np.floating[Any]],
        subjects: tuple[str, ...],
    ) -> 'RMDesign':
        """
        Same factors and levels over a different subject population.

        Used by the bootstrap resampler. Per-cell trial counts don't carry
        over, since synthetic subjects are not observed directly.
        """
        if values.shape[1:] != self.values.shape[1:]:
            raise DimensionError(
                f"values: expected cell shape {self.values.shape[1:]}, "
                f"got {values.shape[1:]}"
            )
        if values.shape[0] != len(subjects):
            raise DimensionError(
                f"values has {values.shape[0]} subjects, labels has {len(subjects)}"
            )
        return replace(
            self,
            values=values,
            subjects=tuple(subjects),
            cell_counts=None,
            n_trials=int(values.size),
        )

    @staticmethod
    def for_repeated_measures(
        y: Any,
        subject: Any,
        within: dict[str, Any],
    ) -> 'RMDesign':
        """
        Create design for repeated-measures analysis from long-format trials.

        Args:
            y: Response variable (1D, one value per trial)
            subject: Subject identifiers (1D)
            within: {factor_name: 1D condition labels}; key order sets the
                factor order used in report rows

        Returns:
            RMDesign with one aggregated mean per subject x cell

        Raises:
            ValidationError: Invalid inputs or fewer than 2 subjects
            DegenerateFactorError: A factor with fewer than 2 levels
            DataIntegrityError: Design not fully crossed
        """
        values, subjects, levels, counts = aggregate_trials(y, subject, within)
        return RMDesign(
            values=values,
            subjects=subjects,
            factors=tuple(levels.keys()),
            levels=levels,
            cell_counts=counts,
            n_trials=int(np.sum(counts)),
        )

    @staticmethod
    def from_data(
        data: Any,
        *,
        dv: str,
        subject: str,
        within: list[str] | tuple[str, ...],
    ) -> 'RMDesign':
        """
        Create design from tabular trial data.

        Args:
            data: DataSource, pandas DataFrame, or mapping of columns
            dv: Response column
            subject: Subject id column
            within: Columns treated as within-subject factors

        Returns:
            RMDesign
        """
        if isinstance(within, str):
            within = [within]
        if len(set(within)) != len(within):
            raise ValidationError(f"within: duplicate factor names in {list(within)}")

        ds = DataSource.coerce(data)
        return RMDesign.for_repeated_measures(
            ds[dv],
            ds[subject],
            {name: ds[name] for name in within},
        )
