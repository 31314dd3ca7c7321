# Collection names shared by the pipeline builders and the executor.
INVOICES = "invoices"
CUSTOMERS = "customers"
REVENUE = "revenue"
