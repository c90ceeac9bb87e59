"""
IRT model estimation module.

This module provides infrastructure for estimating multidimensional 4PL
models (1PL/2PL/3PL as restrictions) with an EM loop over a quadrature
grid.

Key components:
- QuadratureGrid / build_grid: Discretized standard-normal trait prior
- estimate_posteriors: E-step
- update_item: M-step gradient step for one item
- MIRTEstimator: Fit loop with cycle callbacks and cancellation
- score_eap / estimate_abilities: EAP scoring
"""
