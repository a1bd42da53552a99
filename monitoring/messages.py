"""Message texts sent to the operator."""


def service_down_message(service: str) -> str:
    return f"*Alert*:\nService {service} is not running."


def service_running_message(service: str) -> str:
    return f"*Status*:\nService {service} is running."


def status_message(service: str, running: bool) -> str:
    return service_running_message(service) if running else service_down_message(service)
