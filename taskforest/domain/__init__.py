"""Domain layer for taskforest.

Pure models and functions: the task hierarchy index, progress
calculator and view builder, plus the shared Result monad and error
values. Nothing in this package performs I/O.
"""
