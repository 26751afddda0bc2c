from cloud_agent_bridge.setup.ioc.container import AppProvider, create_container

__all__ = ["AppProvider", "create_container"]
