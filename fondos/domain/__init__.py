# fondos/domain/__init__.py
# Domain records, the ledger container and the result/error types shared by the engines.
