"""Names and fixed fragments of the expansion."""

# #[fnerror] / #[fnerror::fnerror] on the function
FN_MARKER_PATHS = (("fnerror",), ("fnerror", "fnerror"))

# #[fnerr] on a call expression
CALL_MARKER = "fnerr"

# #[fnerror(ident = Name)]
NAME_ARG = "ident"

RESULT_IDENT = "Result"
RESULT_PATH = "::std::result::Result"

DERIVE_ATTR = "derive"
DERIVE_TOKENS = "(Debug, ::thiserror::Error)"
VARIANT_ATTR = "error"
