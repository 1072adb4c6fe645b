"""Monthly dues: payments, billing calendar and the payment status engine."""
