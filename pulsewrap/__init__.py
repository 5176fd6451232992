"""Core modules for the PulseWrap KPI recap pipeline."""

from . import captions, datasets, dates, insights, models, parsing, recap, report, utils, viz

__all__ = [
	"captions",
	"datasets",
	"dates",
	"insights",
	"models",
	"parsing",
	"recap",
	"report",
	"utils",
	"viz",
]
