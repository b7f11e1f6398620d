"""QC Inspector: knowledge-grounded defect photo analysis with a vision LLM."""

__version__ = "0.1.0"
