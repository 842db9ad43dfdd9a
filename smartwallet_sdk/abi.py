"""
Function signatures used by the reference smart-wallet flows.

Full contract ABIs are owned by the contracts themselves; only the
signatures needed for calldata encoding live here.
"""

# ERC-20 with a public mint, as deployed for test tokens
ERC20_MINT = "mint(address,uint256)"
ERC20_TRANSFER = "transfer(address,uint256)"

# Modular account execution entry points
EXECUTE = "execute(address,uint256,bytes)"
EXECUTE_WITH_RUNTIME_VALIDATION = "executeWithRuntimeValidation(bytes,bytes)"

# "Demo USDC" mintable ERC-20 on Base Sepolia
DEMO_TOKEN_ADDRESS = "0xCFf7C6dA719408113DFcb5e36182c6d5aa491443"
DEMO_TOKEN_DECIMALS = 18
