"""Configuration handling.

    - handler: Validated key/value configuration store
    - rules: Rule string parsing
    - validators: Built-in validators and the validator registry
    - parsers: JSON and YAML parsers
    - loader: File loading and the caching loader
    - cache: Cache backends
    - merger: Hierarchical merging of loaded configs
"""
