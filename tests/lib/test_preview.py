from ..util.mock_progress import MockMsg
from texpreview.lib import preview, math_render

import unittest
from hamcrest import (assert_that, contains_exactly, contains_string, has_length, is_, is_not,
                      none)

import lxml.html


class PreviewTestCase(unittest.TestCase):

    def test_sanitizer_removes_scripts_keeps_styles(self):
        sanitize = preview.make_sanitizer()
        html = sanitize('<div><p style="color:red" onclick="evil()">Hi</p>'
                        '<script>evil()</script><a href="javascript:evil()">x</a></div>')
        assert_that(html, contains_string('style="color:red"'))
        assert_that(html, is_not(contains_string('onclick')))
        assert_that(html, is_not(contains_string('<script')))
        assert_that(html, is_not(contains_string('javascript:')))


    def test_sanitizer_blank(self):
        assert_that(preview.make_sanitizer()(''), is_(''))


    def test_math_survives_sanitizer(self):
        fragment = preview.render_fragment(
            r'Text $\frac{a}{b} < c$ here.',
            sanitize = preview.make_sanitizer(),
            math_mode = math_render.MATH_RAW)
        assert_that(fragment, contains_string(r'$\frac{a}{b} &lt; c$'))


    def test_raw_math_cannot_carry_markup(self):
        fragment = preview.render_fragment(
            'Text $<img src=x onerror=alert(1)>$ end',
            sanitize = preview.make_sanitizer(),
            math_mode = math_render.MATH_RAW)
        assert_that(fragment, contains_string('$&lt;img src=x onerror=alert(1)&gt;$'))
        assert_that(lxml.html.fragment_fromstring(fragment, create_parent = 'div').cssselect('img'),
                    has_length(0))


    def test_injected_sanitizer_runs_before_restore(self):
        seen = []

        def sanitize(html):
            seen.append(html)
            return html.replace('<p', '<p class="clean"')

        fragment = preview.render_fragment('A $x$ b', sanitize = sanitize)
        assert_that(seen, contains_exactly(contains_string('__MTH_0__')))
        assert_that(fragment, contains_string('class="clean"'))
        assert_that(fragment, contains_string('$x$'))


    def test_find_title(self):
        assert_that(preview.find_title('<h1 style="x">The <em>Title</em></h1><p>b</p>'),
                    is_('The Title'))
        assert_that(preview.find_title('<p>b</p>'), is_(none()))
        assert_that(preview.find_title(''), is_(none()))


    def test_build_page(self):
        page = preview.build_page('<h1>My &amp; Doc</h1><p>Body</p>',
                                  word_count = 42,
                                  messages = [MockMsg(msg = 'Problem one')])
        root = lxml.html.document_fromstring(page)

        assert_that(root.findtext('head/title'), is_('My & Doc'))
        assert_that(root.xpath('//script[@src]'), has_length(1))
        assert_that([e.text_content() for e in root.cssselect('.texpv-status')],
                    contains_exactly('42 words'))
        assert_that([e.text_content() for e in root.cssselect('.mock-msg')],
                    contains_exactly('Problem one'))
        assert_that(root.xpath('//style/text()')[0], contains_string('--p-accent'))


    def test_build_page_without_mathjax(self):
        page = preview.build_page('<p>x</p>', title = 'T', math_mode = math_render.MATH_MATHML)
        root = lxml.html.document_fromstring(page)
        assert_that(root.xpath('//script'), has_length(0))
        assert_that(root.cssselect('.texpv-status'), has_length(0))
        assert_that(root.findtext('head/title'), is_('T'))
