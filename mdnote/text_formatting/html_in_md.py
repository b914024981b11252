"""
The small set of known HTML classes the rich-text editor uses for checklists, and
helpers for working with them on a BeautifulSoup tree.

A checklist item on the editor surface looks like:

    <ul class="x-todo">
      <li><span class="x-todo-box" contenteditable="false"><input type="checkbox" checked="true"/></span>Done</li>
    </ul>

The span is the checkbox widget. It can't be edited as text, and the input inside
it is a live checkbox whose `checked` attribute is the item's state.
"""

from typing import List

from bs4 import BeautifulSoup, Tag

from mdnote.config.settings import global_settings


def class_list(tag: Tag) -> List[str]:
    value = tag.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(tag: Tag, class_name: str) -> bool:
    return class_name in class_list(tag)


def add_class(tag: Tag, class_name: str) -> None:
    classes = class_list(tag)
    if class_name not in classes:
        tag["class"] = classes + [class_name]


def remove_class(tag: Tag, class_name: str) -> None:
    classes = class_list(tag)
    if class_name not in classes:
        return
    classes.remove(class_name)
    if classes:
        tag["class"] = classes
    else:
        del tag["class"]


def is_checkbox_input(tag: Tag) -> bool:
    return tag.name == "input" and str(tag.get("type", "")).lower() == "checkbox"


def is_disabled_checkbox(tag: Tag) -> bool:
    """
    A read-only checkbox, as a Markdown renderer writes for task-list items.
    """
    return is_checkbox_input(tag) and tag.has_attr("disabled")


def is_checkbox_widget(tag: Tag) -> bool:
    return has_class(tag, global_settings().checkbox_widget_class)


def is_checked(checkbox: Tag) -> bool:
    return checkbox.has_attr("checked")


def new_checkbox_widget(soup: BeautifulSoup, checked: bool) -> Tag:
    widget = soup.new_tag(
        "span",
        attrs={"class": [global_settings().checkbox_widget_class], "contenteditable": "false"},
    )
    checkbox = soup.new_tag("input", attrs={"type": "checkbox"})
    if checked:
        checkbox["checked"] = "true"
    widget.append(checkbox)
    return widget


## Tests


def test_class_helpers():
    soup = BeautifulSoup('<ul class="notes x-todo"><li>a</li></ul><ol><li>b</li></ol>', "html.parser")
    ul, ol = soup.find("ul"), soup.find("ol")
    assert has_class(ul, "x-todo")
    assert not has_class(ol, "x-todo")

    remove_class(ul, "x-todo")
    assert class_list(ul) == ["notes"]
    remove_class(ul, "notes")
    assert not ul.has_attr("class")

    add_class(ol, "x-todo")
    add_class(ol, "x-todo")
    assert class_list(ol) == ["x-todo"]


def test_new_checkbox_widget():
    soup = BeautifulSoup("", "html.parser")
    checked = new_checkbox_widget(soup, checked=True)
    unchecked = new_checkbox_widget(soup, checked=False)
    assert str(checked).startswith('<span class="x-todo-box" contenteditable="false"><input ')
    assert 'checked="true"' in str(checked)
    assert "checked" not in str(unchecked)
    assert is_checkbox_widget(checked)
    assert is_checked(checked.find(is_checkbox_input))
    assert not is_checked(unchecked.find(is_checkbox_input))
    assert not is_disabled_checkbox(checked.find(is_checkbox_input))
