"""Infrastructure layer — identity counters, in-memory repositories, workspace.

State lives in process memory only and is lost on exit.
Repositories store domain records but never apply business rules;
the service layer bridges between callers and these stores.
"""
