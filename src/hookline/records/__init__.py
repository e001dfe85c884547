"""Record management module -- schemas, store, stage engine and derived views.

Provides Pydantic schemas (Contact, Deal, Activity, Snapshot and the view
results), RecordStore for integrity-preserving mutations, the stage
transition engine, and pure view functions for the dashboard, deal board
and contact search.
"""
