"""
Kernel layer.

This package groups the arithmetic kernels the quoting core is built on.
`curvequote/kernels/python/` contains the uint256 primitives; everything
above it (pool state, quoting, the curve facade) calls into them rather than
doing raw integer arithmetic.
"""
