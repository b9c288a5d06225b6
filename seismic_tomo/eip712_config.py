# EIP712 Configuration for the Seismic swipe protocol
# Both schemas must match what the Seismic backend and the Swipe contract
# hash, field for field, or the signatures are rejected.

# Domain parameters
DOMAIN_NAME = "Seismic"
DOMAIN_VERSION = "1"
CHAIN_ID = 31337
VERIFYING_CONTRACT = "0x0000000000000000000000000000000000000000"

# EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)
EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

SEISMIC_DOMAIN = {
    "name": DOMAIN_NAME,
    "version": DOMAIN_VERSION,
    "chainId": CHAIN_ID,
    "verifyingContract": VERIFYING_CONTRACT,
}

# Swipe data availability request, signed by the swiping wallet:
# SwipeDAReqTx(uint256 nonce,SwipeDAReq body)SwipeDAReq(address recipient,bool positive,uint256 blind)
SWIPE_DA_REQ_TYPED = {
    "label": "SwipeDAReq",
    "domain": SEISMIC_DOMAIN,
    "types": {
        "EIP712Domain": EIP712_DOMAIN_TYPE,
        "SwipeDAReqTx": [
            {"name": "nonce", "type": "uint256"},
            {"name": "body", "type": "SwipeDAReq"},
        ],
        "SwipeDAReq": [
            {"name": "recipient", "type": "address"},
            {"name": "positive", "type": "bool"},
            {"name": "blind", "type": "uint256"},
        ],
    },
}

# Match query, signed by the wallet whose matches are requested:
# SwipeMatchTx(uint256 nonce,SwipeMatch body)SwipeMatch(uint256 startIndex)
SWIPE_MATCH_TYPED = {
    "label": "SwipeMatch",
    "domain": SEISMIC_DOMAIN,
    "types": {
        "EIP712Domain": EIP712_DOMAIN_TYPE,
        "SwipeMatchTx": [
            {"name": "nonce", "type": "uint256"},
            {"name": "body", "type": "SwipeMatch"},
        ],
        "SwipeMatch": [
            {"name": "startIndex", "type": "uint256"},
        ],
    },
}

# Blinds are sampled as BN254 scalar field elements.
BN254_SCALAR_FIELD = 21888242871839275222246405745257275088548364400416034343698204186575808495617
