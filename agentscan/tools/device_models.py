from ua_parser import user_agent_parser


def has_useful_data(data):
    return bool(data) and data != 'Other' and data != 'Generic'


def device_model(user_agent):
    """Returns (brand, model) of the device as ua_parser knows it.

    Unknown values are None.
    """

    if not user_agent:
        return None, None

    device = user_agent_parser.ParseDevice(user_agent)
    brand = device.get('brand')
    model = device.get('model')

    return (brand if has_useful_data(brand) else None,
            model if has_useful_data(model) else None)
