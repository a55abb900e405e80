"""Realized capital-gains ledger using FIFO and moving-average cost bases."""
