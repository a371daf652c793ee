"""Stream names and frame tags shared with the MetaMask content script."""

CONTENT_SCRIPT = "metamask-contentscript"
INPAGE = "metamask-inpage"
MULTICHAIN_SUBSTREAM_NAME = "metamask-multichain-provider"
METAMASK_PROVIDER_STREAM_NAME = "metamask-provider"
METAMASK_EXTENSION_CONNECT_CAN_RETRY = "METAMASK_EXTENSION_CONNECT_CAN_RETRY"
CAIP_348_TYPE = "caip-348"
