"""
Pneuma - On-chain interaction layer for synthetix-cli.

Provides the JSON-RPC provider, ABI descriptors, contract bindings and the
stage/submit/receipt transaction pipeline.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
