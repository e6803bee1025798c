"""Site-relative output locations shared by the builders."""

ASSETS_OVERVIEWS_RELATIVE_PATH = "assets/content/overviews"
ASSETS_API_DOCS_RELATIVE_PATH = "assets/content/api-docs"
ASSETS_EXAMPLES_HIGHLIGHTED_RELATIVE_PATH = "assets/content/examples-highlighted"
SITE_CONTENT_COMPONENTS_RELATIVE_PATH = "components"
NAVIGATIONS_FILENAME = "navigations.json"

# Component directory conventions
COMPONENT_DOC_DIR = "doc"
COMPONENT_API_DIR = "api"
COMPONENT_EXAMPLES_DIR = "examples"
