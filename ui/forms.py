# ui/forms.py
from django import forms
from django.forms import inlineformset_factory

from backend.formatting import PriceFormatError, format_price, parse_price
from backend.models import Customer, Order, OrderItem, Product, User


class SearchBarForm(forms.Form):
    """
    Filter text plus an optional checkbox. Placeholder, checkbox label and the
    action button are set per page; the template reads them from the form.
    """
    filter = forms.CharField(required=False, max_length=255)
    checkbox = forms.BooleanField(required=False)

    def __init__(self, *args, placeholder="Search", checkbox_text=None, action_text=None, action_url=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.placeholder = placeholder
        self.checkbox_text = checkbox_text
        self.action_text = action_text
        self.action_url = action_url
        self.fields["filter"].widget.attrs.update({"placeholder": placeholder, "class": "search-field"})

    def get_filter(self):
        if self.is_bound and self.is_valid():
            return self.cleaned_data["filter"]
        return ""

    def is_checkbox_checked(self) -> bool:
        if self.is_bound and self.is_valid():
            return self.cleaned_data["checkbox"]
        return False


class ProductForm(forms.ModelForm):
    """
    Shows 'Price' as a currency string (accepts 12, 12.5, 12.50, $1,234.56) and
    stores it in cents.
    """
    price_display = forms.CharField(label="Price", help_text="E.g. 12.50")

    class Meta:
        model = Product
        fields = ["name"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields["price_display"].initial = format_price(self.instance.price)

    def clean_price_display(self):
        try:
            cents = parse_price(self.cleaned_data.get("price_display") or "")
        except PriceFormatError as e:
            raise forms.ValidationError(str(e))
        if cents > 100000:
            raise forms.ValidationError("Price cannot be above $1,000.00.")
        return cents

    def validate_unique(self):
        # ProductService reports duplicate names
        pass

    def save(self, commit=True):
        instance = super().save(commit=False)
        instance.price = self.cleaned_data["price_display"]
        if commit:
            instance.save()
        return instance


class UserForm(forms.ModelForm):
    password = forms.CharField(
        required=False,
        widget=forms.PasswordInput(render_value=False),
        help_text="Leave empty to keep the current password.",
    )

    class Meta:
        model = User
        fields = ["email", "first_name", "last_name", "role"]

    def clean_password(self):
        password = self.cleaned_data.get("password")
        if not self.instance.pk and not password:
            raise forms.ValidationError("New users need a password.")
        if password and len(password) < 4:
            raise forms.ValidationError("Use at least 4 characters.")
        return password

    def save(self, commit=True):
        user = super().save(commit=False)
        if self.cleaned_data.get("password"):
            user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class CustomerForm(forms.ModelForm):
    class Meta:
        model = Customer
        fields = ["full_name", "phone_number", "details"]


class OrderForm(forms.ModelForm):
    class Meta:
        model = Order
        fields = ["due_date", "due_time", "pickup_location", "state", "paid"]
        widgets = {
            "due_date": forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d"),
            "due_time": forms.TimeInput(attrs={"type": "time"}, format="%H:%M"),
        }


OrderItemFormSet = inlineformset_factory(
    Order,
    OrderItem,
    fields=["product", "quantity", "comment"],
    extra=1,
    can_delete=True,
    min_num=1,
    validate_min=True,
)


class CommentForm(forms.Form):
    comment = forms.CharField(max_length=255, widget=forms.TextInput(attrs={"placeholder": "Add a comment"}))
