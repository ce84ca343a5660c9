"""
Oracle - the interactive contract-call driver.

- navigator: contract list ordering/filtering, function ranking and display
- coercion:  free-text answers to typed call arguments
- prompts:   questionary-backed prompt surface
- display:   returned values, receipts and errors
- driver:    the contract/function state loop and the call driver
"""
