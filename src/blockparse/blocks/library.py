"""Built-in block types"""

from html import escape

from blockparse.core.models import BlockType
from blockparse.core.query import children, prop
from blockparse.core.serializer import get_block_default_classname


FREEFORM = 'core/freeform'


paragraph = BlockType(
    name='core/paragraph',
    attributes={'content': children('p')},
    default_attributes={'content': ''},
    to_markup=lambda attrs: f"<p>{attrs['content']}</p>",
)

code = BlockType(
    name='core/code',
    attributes={'content': prop('code', 'textContent')},
    default_attributes={'content': ''},
    to_markup=lambda attrs: f"<pre><code>{escape(attrs['content'], quote=False)}</code></pre>",
)

preformatted = BlockType(
    name='core/preformatted',
    attributes={'content': children('pre')},
    default_attributes={'content': ''},
    to_markup=lambda attrs: f"<pre>{attrs['content']}</pre>",
)

verse = BlockType(
    name='core/verse',
    attributes={'content': children('pre')},
    default_attributes={'content': ''},
    to_markup=lambda attrs: (
        f'<pre class="{get_block_default_classname("core/verse")}">{attrs["content"]}</pre>'
    ),
)

separator = BlockType(
    name='core/separator',
    to_markup=lambda attrs: '<hr />',
)

# Catch-all for free text and unregistered names: keeps the fragment verbatim.
freeform = BlockType(
    name=FREEFORM,
    attributes=lambda raw: {'content': raw},
    to_markup=lambda attrs: attrs.get('content', ''),
)


def default_block_types() -> tuple[BlockType, ...]:
    return (paragraph, code, preformatted, verse, separator, freeform)
