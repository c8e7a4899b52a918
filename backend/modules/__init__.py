"""
Feature modules for the PivotDesk backend.

- auth: Identity Store adapter (Supabase Auth)
- sessions: single-device Session Guard and session token transport
- subscriptions: entitlement rows and plan arithmetic
- billing: Razorpay orders, signatures and the Payment Reconciler
- access: per-request access state machine for protected routes
- calculator: the subscription-gated pivot calculator

Most modules keep the same layout: interfaces.py (Protocols), models.py,
service.py, repository.py, exceptions.py and routes.py. Modules depend on
each other's interfaces, not on concrete implementations.
"""
