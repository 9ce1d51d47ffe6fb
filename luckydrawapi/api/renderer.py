import json

from rest_framework.renderers import BaseRenderer, BrowsableAPIRenderer


FORM_PATHS = ('/login', '/cycles', '/draws/trigger', '/draws/reset')


# This is so we dont leak guest tokens or participant data in forms
class NoHTMLFormBrowsableAPIRenderer(BrowsableAPIRenderer):

    def get_rendered_html_form(self, data, view, method, request):
        if request.path.rstrip('/').endswith(FORM_PATHS):
            return super().get_rendered_html_form(data, view, method, request)
        return ''

    def get_raw_data_form(self, data, view, method, request):
        return


class SVGRenderer(BaseRenderer):
    media_type = 'image/svg+xml'
    format = 'svg'
    charset = None
    render_style = 'binary'

    def render(self, data, media_type=None, renderer_context=None):
        # Error responses still carry a DRF detail dict.
        if isinstance(data, dict):
            return json.dumps(data).encode()
        return data
