# Procedure-call adapter for the entry store
