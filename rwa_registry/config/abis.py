# Minimal RwaUrn ABI (outputConduit view only)
RWA_URN_ABI = [
    {
        "name": "outputConduit",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    }
]
