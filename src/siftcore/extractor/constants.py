"""
Selector tables, allow-lists and token lists used by the extraction pipeline.
"""

from __future__ import annotations

import re

# Ordered from most to least specific; earlier entries get a larger rank bonus.
ENTRY_POINT_ELEMENTS = [
    "#post",
    ".post-content",
    ".article-content",
    "#article-content",
    ".article_post",
    ".article-wrapper",
    ".entry-content",
    ".content-article",
    ".post",
    ".article",
    "article",
    '[role="article"]',
    "main",
    '[role="main"]',
    "body",
]

BLOCK_ELEMENTS = ["div", "section", "article", "main", "aside", "header", "footer", "nav"]

INLINE_ELEMENTS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "br",
        "cite",
        "code",
        "data",
        "dfn",
        "em",
        "i",
        "img",
        "kbd",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
        "wbr",
        "del",
        "ins",
        "math",
    }
)

# Subtrees that flattening never reaches into.
PRESERVE_ELEMENTS = frozenset(
    {"pre", "code", "table", "figure", "figcaption", "picture", "math", "svg", "video", "audio", "iframe", "ul", "ol"}
)

WRAPPER_ELEMENTS = frozenset({"div", "section", "center"})

BLOCK_LEVEL_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
        "iframe",
        "video",
        "audio",
        "picture",
    }
)

ALLOWED_EMPTY_ELEMENTS = frozenset(
    {
        "area",
        "audio",
        "base",
        "br",
        "canvas",
        "col",
        "embed",
        "figure",
        "hr",
        "iframe",
        "img",
        "input",
        "link",
        "math",
        "meta",
        "object",
        "param",
        "picture",
        "source",
        "svg",
        "td",
        "th",
        "track",
        "video",
        "wbr",
    }
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "alt",
        "allow",
        "allowfullscreen",
        "aria-label",
        "checked",
        "colspan",
        "controls",
        "data-lang",
        "data-latex",
        "datetime",
        "dir",
        "display",
        "frameborder",
        "headers",
        "height",
        "href",
        "lang",
        "poster",
        "rowspan",
        "scope",
        "sizes",
        "src",
        "srcset",
        "start",
        "title",
        "type",
        "width",
    }
)

KEEP_ID_PATTERN = re.compile(r"^(?:fn:\d+|fnref:\d+(?:-\d+)?|footnotes)$")
KEEP_CLASS_PATTERN = re.compile(r"^(?:language-[\w+#-]+|footnote|footnote-backref)$")

# Removed wherever they appear, except around the content root.
EXACT_SELECTORS = [
    "noscript",
    'script:not([type^="math/"])',
    "style",
    "meta",
    "link",
    "template",
    "dialog",
    "button",
    "select",
    "textarea",
    'input:not([type="checkbox"])',
    "form",
    "nav",
    "aside",
    "footer",
    "header > nav",
    "object",
    "embed",
    'iframe:not([src*="youtube.com"]):not([src*="youtube-nocookie.com"]):not([src*="youtu.be"])',
    ".ad:not([class*='gradient'])",
    '[class^="ad-" i]',
    '[class$="-ad" i]',
    '[id^="ad-" i]',
    '[id$="-ad" i]',
    '[role="banner"]',
    '[role="dialog"]',
    '[role="complementary"]',
    '[role="navigation"]',
    '[role="button"]:not(summary)',
    '[role="listitem"][class*="share" i]',
    '[aria-label="breadcrumb" i]',
    '[hidden]:not(details)',
    ".hidden",
    ".invisible",
    ".promo",
    ".Promo",
    "#barrier-page",
    ".alert",
    '[id="comments"]',
    '[id="comment"]',
    '[id*="cookie" i]',
    '[class*="cookie-banner" i]',
    '[class*="newsletter" i]',
    '[class*="subscribe" i]',
    '[data-ad]',
    '[data-ad-slot]',
    '[data-component="share"]',
    "#toc",
    ".toc",
    "#table-of-contents",
    ".table-of-contents",
    ".author-bio",
    ".related-posts",
    ".sidebar",
    "#sidebar",
]

# Substrings matched against class, id and data-* attribute values.
PARTIAL_SELECTORS = [
    "a-statement",
    "access-wall",
    "activitypub",
    "actioncall",
    "addcomment",
    "advert",
    "adlayout",
    "ad-tldr",
    "ad-placement",
    "ads-container",
    "_ad_",
    "after_content",
    "after_main_article",
    "afterpost",
    "allterms",
    "-alert-",
    "alert-box",
    "appendix",
    "_archive",
    "around-the-web",
    "aroundpages",
    "article-author",
    "article-badges",
    "article-banner",
    "article-bottom-section",
    "article-bottom",
    "article-category",
    "article-card",
    "article-citation",
    "article__copy",
    "article_date",
    "article-date",
    "article-end ",
    "article_header",
    "article-header",
    "article__header",
    "article__hero",
    "article__info",
    "article-info",
    "article-meta",
    "article_meta",
    "article__meta",
    "articlename",
    "article-subject",
    "article_subject",
    "article-snippet",
    "article-separator",
    "article--share",
    "article--topics",
    "articletags",
    "article-tags",
    "article_tags",
    "articletitle",
    "article-title",
    "article_title",
    "articletopics",
    "article-topics",
    "article--lede",
    "articlewell",
    "associated-people",
    "audio-card",
    "author-bio",
    "author-box",
    "author-info",
    "author_info",
    "authorm",
    "author-mini-bio",
    "author-name",
    "author-publish-info",
    "authored-by",
    "avatar",
    "back-to-top",
    "backlink_container",
    "backlinks-section",
    "bio-block",
    "biobox",
    "blog-pager",
    "bookmark-",
    "-bookmark",
    "bottominfo",
    "bottomnav",
    "bottom-of-article",
    "bottom-wrapper",
    "brand-bar",
    "breadcrumb",
    "brdcrumb",
    "button-wrapper",
    "buttons-container",
    "btn-",
    "-btn",
    "byline",
    "captcha",
    "card-text",
    "card-media",
    "card-post",
    "carouselcontainer",
    "carousel-container",
    "cat_header",
    "catlinks",
    "_categories",
    "card-author",
    "card-content",
    "chapter-list",
    "collections",
    "comments",
    "commentbox",
    "comment-button",
    "commentcomp",
    "comment-content",
    "comment-count",
    "comment-form",
    "comment-number",
    "comment-respond",
    "comment-thread",
    "comment-wrap",
    "complementary",
    "consent",
    "contact-",
    "content-card",
    "content-topics",
    "contentpromo",
    "context-bar",
    "context-widget",
    "core-collateral",
    "cover-image",
    "cover-photo",
    "cover-wrap",
    "created-date",
    "creative-commons_",
    "c-subscribe",
    "_cta",
    "-cta",
    "cta-",
    "cta_",
    "current-issue",
    "custom-list-number",
    "dateline",
    "dateheader",
    "date-header",
    "date-pub",
    "disclaimer",
    "disclosure",
    "discussion",
    "discuss_",
    "disqus",
    "donate",
    "donation",
    "dropdown",
    "eletters",
    "emailsignup",
    "engagement-widget",
    "enhancement",
    "entry-author-info",
    "entry-categories",
    "entry-date",
    "entry-title",
    "entry-utility",
    "-error",
    "error-",
    "eyebrow",
    "expand-reduce",
    "external-anchor",
    "externallinkembedwrapper",
    "extra-services",
    "extra-title",
    "facebook",
    "fancy-box",
    "favorite",
    "featured-content",
    "feature_feed",
    "feedback",
    "feed-links",
    "field-site-sections",
    "fixheader",
    "floating-vid",
    "follower",
    "footer",
    "footnote-back",
    "footnoteback",
    "form-group",
    "for-you",
    "frontmatter",
    "further-reading",
    "fullbleedheader",
    "gated-",
    "gh-feed",
    "gist-meta",
    "goog-",
    "graph-view",
    "hamburger",
    "header_logo",
    "header-logo",
    "header-pattern",
    "hero-list",
    "hide-for-print",
    "hide-print",
    "hide-when-no-script",
    "hidden-print",
    "hidden-sidenote",
    "hidden-accessibility",
    "infoline",
    "instacartIntegration",
    "interlude",
    "interaction",
    "itemendrow",
    "invisible",
    "jp-no-solution",
    "jp-relatedposts",
    "jswarning",
    "js-warning",
    "jumplink",
    "jumpto",
    "jump-to-",
    "js-skip-to-content",
    "keepreading",
    "keep-reading",
    "keep_reading",
    "keyword_wrap",
    "kicker",
    "labstab",
    "-labels",
    "language-name",
    "lastupdated",
    "latest-content",
    "-ledes-",
    "-license",
    "license-",
    "lightbox-popup",
    "like-button",
    "link-box",
    "links-grid",
    "links-title",
    "listing-dynamic-terms",
    "list-tags",
    "listinks",
    "loading",
    "loa-info",
    "logo_container",
    "ltx_role_refnum",
    "ltx_tag_bibitem",
    "ltx_error",
    "masthead",
    "marketing",
    "media-inquiry",
    "-menu",
    "menu-",
    "metadata",
    "might-like",
    "minibio",
    "more-about",
    "_modal",
    "-modal",
    "more-",
    "morenews",
    "morestories",
    "more_wrapper",
    "most-read",
    "move-helper",
    "mw-editsection",
    "mw-cite-backlink",
    "mw-indicators",
    "mw-jump-link",
    "nav-",
    "nav_",
    "navigation-post",
    "next-",
    "newsgallery",
    "news-story-title",
    "newsletter_",
    "newsletterbanner",
    "newslettercontainer",
    "newsletter-form",
    "newsletter-signup",
    "newslettersignup",
    "newsletterwidget",
    "newsletterwrapper",
    "not-found",
    "notessection",
    "nomobile",
    "noprint",
    "open-slideshow",
    "originally-published",
    "other-blogs",
    "outline-view",
    "pagehead",
    "page-header",
    "page-title",
    "paywall_message",
    "-partners",
    "permission-",
    "plea",
    "popular",
    "popup_links",
    "pop_stories",
    "pop-up",
    "post__author",
    "post-author",
    "post-bottom",
    "post__category",
    "postcomment",
    "postdate",
    "post-date",
    "post_date",
    "post-details",
    "post-feeds",
    "postinfo",
    "post-info",
    "post_info",
    "post-inline-date",
    "post-links",
    "postlist",
    "post_list",
    "post_meta",
    "post-meta",
    "postmeta",
    "post_more",
    "postnavi",
    "post-navigation",
    "postpath",
    "post-preview",
    "postsnippet",
    "post_snippet",
    "post-snippet",
    "post-subject",
    "posttax",
    "post-tax",
    "post_tax",
    "posttag",
    "post_tag",
    "post-tag",
    "post_time",
    "posttitle",
    "post-title",
    "post_title",
    "post__title",
    "post-share",
    "post-teaser",
    "post-tags",
    "pre-footer",
    "preview",
    "prev-",
    "previousnext",
    "press-inquiries",
    "print-none",
    "print-header",
    "print:hidden",
    "privacy-notice",
    "privacy-settings",
    "profile",
    "promo_article",
    "promo-bar",
    "promo-box",
    "pubdate",
    "pub_date",
    "pub-date",
    "publish_date",
    "publish-date",
    "publication-date",
    "publicationname",
    "qr-code",
    "qr_code",
    "quick_up",
    "_rail",
    "ratingssection",
    "read_also",
    "readmore",
    "read-next",
    "read_next",
    "read_time",
    "read-time",
    "reading_time",
    "reading-time",
    "reading-list",
    "recent-",
    "recent-articles",
    "recentpost",
    "recent_post",
    "recent-post",
    "recommend",
    "redirectedfrom",
    "recirc",
    "register",
    "related",
    "relevant",
    "reversefootnote",
    "robots-nocontent",
    "_rss",
    "rss-link",
    "screen-reader-text",
    "scroll_to",
    "scroll-to",
    "_search",
    "-search",
    "section-nav",
    "series-banner",
    "share-box",
    "sharedaddy",
    "share-icons",
    "sharelinks",
    "share-post",
    "share-print",
    "share-section",
    "sharing_",
    "shariff-",
    "show-for-print",
    "sidebartitle",
    "sidebar-content",
    "sidebar-wrapper",
    "sideitems",
    "sidebar-author",
    "sidebar-item",
    "side-box",
    "side-logo",
    "sign-in-gate",
    "similar-",
    "similar_",
    "similars-",
    "site-index",
    "site-header",
    "siteheader",
    "site-logo",
    "site-name",
    "site-wordpress",
    "skip-content",
    "skip-to-content",
    "skip-link",
    "c-skip-link",
    "_skip",
    "-slider",
    "slug-wrap",
    "social-author",
    "social-shar",
    "social-date",
    "speechify-ignore",
    "speedbump",
    "sponsor",
    "springercitation",
    "sr-only",
    "_stats",
    "story-date",
    "story-navigation",
    "storyreadtime",
    "storysmall",
    "storypublishdate",
    "subject-label",
    "subhead",
    "submenu",
    "-subscribe-",
    "subscriber-drive",
    "subscription-",
    "_tags",
    "tags__item",
    "tag_list",
    "taxonomy",
    "table-of-contents",
    "tabs-",
    "terminaltout",
    "time-rubric",
    "timestamp",
    "time-read",
    "time-to-read",
    "tip_off",
    "tiptout",
    "-tout-",
    "toc-container",
    "toggle-caption",
    "tooltip",
    "topbar",
    "topic-list",
    "topic-subnav",
    "top-wrapper",
    "tree-item",
    "trending",
    "trust-feat",
    "trust-badge",
    "trust-project",
    "twitter",
    "u-hide",
    "upsell",
    "viewbottom",
    "visually-hidden",
    "welcomebox",
    "widget_",
    "widget-",
]

# Checked as whole words in block text by the non-content scorer.
NAVIGATION_INDICATORS = [
    "advertisement",
    "all rights reserved",
    "banner",
    "cookie",
    "comments",
    "copyright",
    "follow me",
    "follow us",
    "footer",
    "header",
    "homepage",
    "login",
    "menu",
    "more articles",
    "more like this",
    "most read",
    "nav",
    "navigation",
    "newsletter",
    "popular",
    "privacy",
    "recommended",
    "register",
    "related",
    "responses",
    "share",
    "sidebar",
    "sign in",
    "sign up",
    "signup",
    "social",
    "sponsored",
    "subscribe",
    "terms",
    "trending",
]

NON_CONTENT_PATTERNS = [
    "advert",
    "ad-",
    "ads",
    "banner",
    "cookie",
    "copyright",
    "footer",
    "header",
    "homepage",
    "menu",
    "nav",
    "newsletter",
    "popular",
    "privacy",
    "recommended",
    "related",
    "rail",
    "share",
    "sidebar",
    "social",
    "sponsored",
    "subscribe",
    "terms",
    "trending",
    "widget",
]

CONTENT_INDICATORS = [
    "admonition",
    "article",
    "content",
    "entry",
    "image",
    "img",
    "font",
    "figure",
    "figcaption",
    "pre",
    "main",
    "post",
    "story",
    "table",
]

FOOTNOTE_INLINE_REFERENCES = [
    'sup.reference',
    'cite.ltx_cite',
    'sup[id^="fnr"]',
    'span[id^="fnr"]',
    'span[class*="footnote_ref"]',
    'span[class*="footnote-ref"]',
    'span.footnote-link',
    'a.citation',
    'a[id^="ref-link"]',
    'a[href^="#fn"]',
    'a[href^="#cite"]',
    'a[href^="#reference"]',
    'a[href^="#footnote"]',
    'a[href^="#r"]',
    'a[href^="#b"]',
    'a[href*="cite_note"]',
    'a[href*="_ftn"]',
    'sup[id^="fnref"]',
    'sup[id^="ref"]',
]

FOOTNOTE_LIST_SELECTORS = [
    'div.footnote ol',
    'div.footnotes ol',
    'div[role="doc-endnotes"]',
    'div[role="doc-footnotes"]',
    'ol.footnotes-list',
    'ol.footnotes',
    'ol.references',
    'ol[class*="article-references"]',
    'section.footnotes ol',
    'section[role="doc-endnotes"]',
    'section[role="doc-footnotes"]',
    'section[role="doc-bibliography"]',
    'ul.footnotes-list',
    'ul.ltx_biblist',
    'div.footnote[data-component-name="FootnoteToDOM"]',
]

HIDDEN_STYLE_PATTERN = re.compile(r"(?:display\s*:\s*none|visibility\s*:\s*hidden|opacity\s*:\s*0(?![.\d]))", re.I)

DATE_PATTERN = re.compile(
    r"\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|Aug(?:ust)?|"
    r"Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\s+\d{1,2},?\s+\d{4}\b"
    r"|\b\d{4}-\d{2}-\d{2}\b",
    re.I,
)

BYLINE_PATTERN = re.compile(r"\b(?:by|written by|author:)\s+[A-Za-z\s]+\b", re.I)

FOOTNOTE_REF_SELECTOR = 'sup[id^="fnref"], a[href^="#fn"], sup.reference, [id^="fnref"]'
FOOTNOTE_LIST_SELECTOR = 'div[id^="footnotes"], div.footnotes, ol.footnotes, section.footnotes, [role="doc-endnotes"]'

# Images with any dimension below this are treated as pixels or icons.
MIN_IMAGE_DIMENSION = 33
