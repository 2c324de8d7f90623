from django import forms

from .services import CART_ACTIONS


class UpdateCartForm(forms.Form):
    action = forms.ChoiceField(choices=[(action, action.title()) for action in CART_ACTIONS])
