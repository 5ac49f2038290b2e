"""TakeARest: a work/rest interval timer with a blocking rest overlay."""

__version__ = "0.1.0"
