"""
Multidimensional IRT estimator using EM over a quadrature grid.

The fit loop alternates:
    E-step: posterior over the grid for every respondent
    M-step: one fixed-learning-rate gradient step per item

and stops once the largest per-item change in a cycle drops below the
configured tolerance (converged) or after max_iter cycles (exhausted).
A cycle-boundary callback sees a snapshot of the item set after every
cycle, and a cancellation token checked at the same boundary ends the fit
early with the partial item set.
"""

import asyncio
import logging
from collections.abc import Callable, Iterator, Sequence

from mirt_engine.core.data_models import ResponseMatrix, ResponseValue
from mirt_engine.core.exceptions import (
    InvalidConfigurationError,
    MalformedInputError,
)
from mirt_engine.irt.estimation.abilities import (
    check_item_dimensions,
    score_eap,
)
from mirt_engine.irt.estimation.config import (
    EstimationConfig,
    FitOptions,
    is_positive_int,
)
from mirt_engine.irt.estimation.data_models import CycleReport, FitResult
from mirt_engine.irt.estimation.enums import ConvergenceStatus, ModelType
from mirt_engine.irt.estimation.optimizer import update_item
from mirt_engine.irt.estimation.posterior import estimate_posteriors
from mirt_engine.irt.estimation.quadrature import (
    QuadratureGrid,
    get_quadrature,
)
from mirt_engine.irt.parameters import Item

logger = logging.getLogger(__name__)

CycleCallback = Callable[[CycleReport], None]


class CancellationToken:
    """Flag a caller sets to stop a running fit at the next cycle boundary."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def initialize_items(
    n_items: int,
    n_dimensions: int,
    model_type: ModelType,
) -> list[Item]:
    """Starting parameters: one default item per response-matrix column."""
    return [
        Item.create_default(n_dimensions=n_dimensions, model_type=model_type)
        for _ in range(n_items)
    ]


def _snapshot(items: Sequence[Item]) -> tuple[Item, ...]:
    return tuple(item.model_copy(deep=True) for item in items)


class MIRTEstimator:
    """
    Multidimensional 4PL estimator (1PL/2PL/3PL as restrictions).

    The estimator holds only immutable configuration and the quadrature
    grid. Item sets are passed in and returned explicitly, so one estimator
    can run independent fits concurrently.
    """

    def __init__(
        self,
        dimensions: int = 1,
        config: EstimationConfig | None = None,
    ):
        """
        Initialize estimator.

        Args:
            dimensions: Number of latent dimensions (discriminations per
                item).
            config: Estimation configuration. If None, uses defaults.

        Raises:
            InvalidConfigurationError: If dimensions is not a positive
                integer or the quadrature configuration is invalid.
        """
        if not is_positive_int(dimensions):
            raise InvalidConfigurationError(
                f"dimensions must be a positive integer, got {dimensions}"
            )
        self.dimensions = dimensions
        self.config = config or EstimationConfig()
        self._quadrature = get_quadrature(self.config.quadrature)

    @property
    def quadrature(self) -> QuadratureGrid:
        """Access quadrature nodes and weights."""
        return self._quadrature

    def _prepare_items(
        self,
        data: ResponseMatrix,
        options: FitOptions,
        initial_items: Sequence[Item] | None,
    ) -> list[Item]:
        if initial_items is None:
            return initialize_items(
                data.n_items, self.dimensions, options.model_type
            )

        if len(initial_items) != data.n_items:
            raise MalformedInputError(
                f"Expected {data.n_items} starting items (one per column), "
                f"got {len(initial_items)}"
            )
        check_item_dimensions(initial_items, self.dimensions)
        return list(_snapshot(initial_items))

    def iterate(
        self,
        data: ResponseMatrix,
        options: FitOptions,
        items: list[Item],
    ) -> Iterator[CycleReport]:
        """
        Run EM cycles on items, in place, yielding after each cycle.

        Stops after options.max_iter cycles. Convergence is left to the
        caller, which can stop consuming the iterator.
        """
        grid = self._quadrature

        for cycle in range(1, options.max_iter + 1):
            e_result = estimate_posteriors(data, items, grid)

            max_change = 0.0
            for item_idx, item in enumerate(items):
                change = update_item(
                    item=item,
                    item_idx=item_idx,
                    data=data,
                    posteriors=e_result.posteriors,
                    nodes=grid.nodes,
                    model_type=options.model_type,
                    learning_rate=options.learning_rate,
                )
                max_change = max(max_change, change)

            logger.debug(
                f"Cycle {cycle}: LL = {e_result.log_likelihood:.4f}, "
                f"max change = {max_change:.6f}"
            )

            yield CycleReport(
                cycle=cycle,
                max_change=max_change,
                log_likelihood=e_result.log_likelihood,
                items=_snapshot(items),
            )

    def _terminal_status(
        self,
        report: CycleReport,
        cancellation: CancellationToken | None,
    ) -> ConvergenceStatus | None:
        if report.max_change < self.config.convergence.tolerance:
            return ConvergenceStatus.CONVERGED
        if cancellation is not None and cancellation.cancelled:
            return ConvergenceStatus.CANCELLED
        return None

    def _build_result(
        self,
        options: FitOptions,
        report: CycleReport,
        status: ConvergenceStatus,
    ) -> FitResult:
        logger.info(
            f"Fit {status.value} after {report.cycle} cycles "
            f"(LL = {report.log_likelihood:.4f})"
        )
        return FitResult(
            items=report.items,
            model_type=options.model_type,
            n_dimensions=self.dimensions,
            n_iterations=report.cycle,
            max_change=report.max_change,
            log_likelihood=report.log_likelihood,
            convergence_status=status,
            model_version=self.config.model_version,
        )

    def fit(
        self,
        data: ResponseMatrix,
        options: FitOptions | None = None,
        initial_items: Sequence[Item] | None = None,
        on_cycle: CycleCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> FitResult:
        """
        Fit the model to response data.

        Args:
            data: Response matrix.
            options: Model type, iteration cap and learning rate. If None,
                uses 2PL, 100 cycles and a learning rate of 0.05.
            initial_items: Optional starting item set, one per column. It is
                copied, never mutated.
            on_cycle: Called with a CycleReport after every cycle.
            cancellation: Checked after every cycle; once cancelled, the fit
                returns the items from the last completed cycle.

        Returns:
            FitResult with the fitted items. Running out of cycles is not an
            error; the result's status is then "exhausted".
        """
        options = options or FitOptions()
        items = self._prepare_items(data, options, initial_items)

        report: CycleReport | None = None
        status = ConvergenceStatus.EXHAUSTED
        for report in self.iterate(data, options, items):
            if on_cycle is not None:
                on_cycle(report)
            terminal = self._terminal_status(report, cancellation)
            if terminal is not None:
                status = terminal
                break

        assert report is not None
        return self._build_result(options, report, status)

    async def fit_async(
        self,
        data: ResponseMatrix,
        options: FitOptions | None = None,
        initial_items: Sequence[Item] | None = None,
        on_cycle: CycleCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> FitResult:
        """
        Same as fit, yielding to the event loop between cycles.

        Control returns to the event loop every
        config.convergence.yield_every cycles. The numbers are identical to
        fit; yielding only lets other tasks (or a caller setting the
        cancellation token) run.
        """
        options = options or FitOptions()
        items = self._prepare_items(data, options, initial_items)
        yield_every = max(1, self.config.convergence.yield_every)

        report: CycleReport | None = None
        status = ConvergenceStatus.EXHAUSTED
        for report in self.iterate(data, options, items):
            if on_cycle is not None:
                on_cycle(report)
            if report.cycle % yield_every == 0:
                await asyncio.sleep(0)
            terminal = self._terminal_status(report, cancellation)
            if terminal is not None:
                status = terminal
                break

        assert report is not None
        return self._build_result(options, report, status)

    def score_eap(
        self,
        responses: Sequence[ResponseValue],
        items: Sequence[Item],
    ) -> float:
        """EAP trait estimate for one response vector on this grid."""
        return score_eap(responses, items, self._quadrature)
