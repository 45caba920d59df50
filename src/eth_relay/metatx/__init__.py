from .signers import Signer, LocalSigner
from .standards import (
    EIP712Domain,
    ForwardRequestTypedData,
    SponsoredCallERC2771Message,
)
from .signatures import (
    sign_typed_data,
    get_forwarder_contract,
    build_forward_request,
    get_meta_tx_type_data,
    build_typed_data,
    sign_meta_tx_request,
    create_forwarded_transaction,
)

__all__ = [
    "Signer",
    "LocalSigner",
    "EIP712Domain",
    "ForwardRequestTypedData",
    "SponsoredCallERC2771Message",
    "sign_typed_data",
    "get_forwarder_contract",
    "build_forward_request",
    "get_meta_tx_type_data",
    "build_typed_data",
    "sign_meta_tx_request",
    "create_forwarded_transaction",
]
