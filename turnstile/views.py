from markupsafe import Markup, escape

from turnstile.configuration import get_configuration


def turnstile_tags(
    site_key=None,
    action=None,
    cdata=None,
    theme=None,
    callback=None,
    response_field_name=None,
    script=True,
    configuration=None,
    **attributes,
):
    """
    Markup for the Cloudflare widget: the api.js script tag and the
    ``cf-turnstile`` container. Extra keyword arguments become ``data-*``
    attributes (underscores turn into dashes).
    """
    config = configuration or get_configuration()
    site_key = site_key or config.require_site_key()

    data = {
        "sitekey": site_key,
        "action": action,
        "cdata": cdata,
        "theme": theme,
        "callback": callback,
        "response-field-name": response_field_name,
    }
    for name, value in attributes.items():
        data[name.replace("_", "-")] = value

    attrs = "".join(
        ' data-{0}="{1}"'.format(name, escape(value))
        for name, value in data.items()
        if value is not None
    )

    html = ""
    if script:
        html += '<script src="{0}" async defer></script>\n'.format(escape(config.api_server_url))
    html += '<div class="cf-turnstile"{0}></div>'.format(attrs)

    return Markup(html)
